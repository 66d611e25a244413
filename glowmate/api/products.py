"""Product catalog API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from glowmate.api.dependencies import (
    get_current_user,
    get_product_service,
    get_review_service,
)
from glowmate.models.enums import ProductSort, TagMatch
from glowmate.models.user import User
from glowmate.schemas.product import (
    PageMeta,
    ProductCreate,
    ProductListResponse,
    ProductResponse,
)
from glowmate.schemas.review import (
    ProductReviewResponse,
    ProductReviewsPage,
    ReviewCreate,
    ReviewResponse,
)
from glowmate.services.products import ProductFilters, ProductService, split_csv
from glowmate.services.reviews import ReviewService

router = APIRouter(prefix="/api/v1/products", tags=["products"])


@router.get("", response_model=ProductListResponse)
def list_products(
    product_service: Annotated[ProductService, Depends(get_product_service)],
    q: Annotated[str | None, Query(max_length=200)] = None,
    brand: Annotated[str | None, Query(max_length=100)] = None,
    category: Annotated[str | None, Query(max_length=100)] = None,
    min_price: Annotated[float | None, Query(alias="minPrice", ge=0)] = None,
    max_price: Annotated[float | None, Query(alias="maxPrice", ge=0)] = None,
    min_rating: Annotated[float | None, Query(alias="minRating", ge=0, le=5)] = None,
    tags: str | None = None,
    tags_logic: Annotated[TagMatch, Query(alias="tagsLogic")] = TagMatch.ANY,
    include_ingredients: Annotated[str | None, Query(alias="includeIngredients")] = None,
    exclude_ingredients: Annotated[str | None, Query(alias="excludeIngredients")] = None,
    sort: ProductSort = ProductSort.RATING_DESC,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
):
    """Search and filter the catalog.

    ``tags``, ``includeIngredients`` and ``excludeIngredients`` take comma
    separated lists.
    """
    filters = ProductFilters(
        q=q,
        brand=brand,
        category=category,
        min_price=min_price,
        max_price=max_price,
        min_rating=min_rating,
        tags=split_csv(tags),
        tag_match=tags_logic,
        include_ingredients=split_csv(include_ingredients),
        exclude_ingredients=split_csv(exclude_ingredients),
    )
    result = product_service.list_products(filters, sort=sort, page=page, limit=limit)
    return ProductListResponse(
        data=[ProductResponse.from_product(p) for p in result.items],
        meta=PageMeta(
            total=result.total,
            page=result.page,
            limit=result.limit,
            total_pages=result.total_pages,
        ),
    )


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    product_data: ProductCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    product_service: Annotated[ProductService, Depends(get_product_service)],
):
    """Add a product to the catalog."""
    return ProductResponse.from_product(product_service.create_product(product_data))


@router.get("/for-me", response_model=list[ProductResponse])
def recommended_products(
    current_user: Annotated[User, Depends(get_current_user)],
    product_service: Annotated[ProductService, Depends(get_product_service)],
):
    """Top rated products that contain none of the user's allergens."""
    return [ProductResponse.from_product(p) for p in product_service.recommend_for(current_user)]


@router.get("/{barcode}", response_model=ProductResponse)
def get_product_by_barcode(
    barcode: str,
    product_service: Annotated[ProductService, Depends(get_product_service)],
):
    """Get a product by barcode, importing unknown barcodes from Open Beauty Facts."""
    return ProductResponse.from_product(product_service.get_by_barcode(barcode))


@router.get("/{barcode}/reviews", response_model=ProductReviewsPage)
def list_product_reviews(
    barcode: str,
    review_service: Annotated[ReviewService, Depends(get_review_service)],
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    reviews, total = review_service.list_for_product(barcode, limit=limit, offset=offset)
    return ProductReviewsPage(
        reviews=[ProductReviewResponse.from_review(r) for r in reviews], total=total
    )


@router.post(
    "/{barcode}/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED
)
def create_review(
    barcode: str,
    review_data: ReviewCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    review_service: Annotated[ReviewService, Depends(get_review_service)],
):
    """Review a product. Each user can review a product once."""
    return ReviewResponse.from_review(review_service.create(current_user, barcode, review_data))
