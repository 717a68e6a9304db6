"""Product categories derived from the approved listings."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session

from src.muslimhunt.api.http.deps import get_db_session, get_optional_user
from src.muslimhunt.api.http.routers.service.products import ProductItem, product_items
from src.muslimhunt.core.search import slugify
from src.muslimhunt.entities.core.profile import Profile
from src.muslimhunt.entities.service.product import ProductRepository

router = APIRouter(prefix="/categories", tags=["categories"])


class CategorySummary(BaseModel):
    name: str
    slug: str
    count: int


class CategoryPage(BaseModel):
    category: CategorySummary
    products: list[ProductItem]


@router.get("", response_model=list[CategorySummary])
def list_categories(session: Session = Depends(get_db_session)) -> list[CategorySummary]:
    counts: dict[str, int] = {}
    for product in ProductRepository(session).list_approved():
        counts[product.category] = counts.get(product.category, 0) + 1
    return [
        CategorySummary(name=name, slug=slugify(name), count=count)
        for name, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    ]


@router.get("/{slug}", response_model=CategoryPage)
def get_category(
    slug: str,
    session: Session = Depends(get_db_session),
    user: Profile | None = Depends(get_optional_user),
) -> CategoryPage:
    """Approved products whose category slugs to ``slug``, most upvoted first."""
    products = [
        p for p in ProductRepository(session).list_approved() if slugify(p.category) == slug
    ]
    if not products:
        raise HTTPException(status_code=404, detail="Category not found")
    summary = CategorySummary(name=products[0].category, slug=slug, count=len(products))
    return CategoryPage(category=summary, products=product_items(session, products, user))
