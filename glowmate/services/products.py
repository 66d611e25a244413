"""Product catalog: search, creation, barcode lookup and recommendations."""

import logging
import math
from dataclasses import dataclass, field

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from glowmate.errors import DuplicateError, NotFoundError
from glowmate.models.enums import ProductSort, TagMatch
from glowmate.models.product import Product
from glowmate.models.user import User
from glowmate.schemas.product import ProductCreate
from glowmate.services.product_lookup import ProductLookupClient

logger = logging.getLogger(__name__)

RECOMMENDATION_LIMIT = 10


def split_csv(value: str | None) -> list[str]:
    """Parse a comma separated query parameter, dropping blanks."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class ProductFilters:
    """Catalog search criteria; every field is optional."""

    q: str | None = None
    brand: str | None = None
    category: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    min_rating: float | None = None
    tags: list[str] = field(default_factory=list)
    tag_match: TagMatch = TagMatch.ANY
    include_ingredients: list[str] = field(default_factory=list)
    exclude_ingredients: list[str] = field(default_factory=list)

    @property
    def filters_json(self) -> bool:
        """Whether any criterion applies to the JSON list columns."""
        return bool(self.tags or self.include_ingredients or self.exclude_ingredients)

    def matches_lists(self, product: Product) -> bool:
        """Apply tag and ingredient criteria to a loaded product."""
        if self.tags:
            hits = [product.has_tag(tag) for tag in self.tags]
            if self.tag_match is TagMatch.ALL and not all(hits):
                return False
            if self.tag_match is TagMatch.ANY and not any(hits):
                return False
        if not all(product.contains_ingredient(name) for name in self.include_ingredients):
            return False
        return not any(product.contains_ingredient(name) for name in self.exclude_ingredients)


@dataclass
class ProductPage:
    items: list[Product]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


class ProductService:
    """Service for the product catalog."""

    def __init__(self, db: Session, lookup: ProductLookupClient):
        self.db = db
        self.lookup = lookup

    def _filtered_query(self, filters: ProductFilters) -> Query:
        query = self.db.query(Product)
        if filters.q:
            pattern = f"%{filters.q}%"
            query = query.filter(or_(Product.name.ilike(pattern), Product.brand.ilike(pattern)))
        if filters.brand:
            query = query.filter(func.lower(Product.brand) == filters.brand.lower())
        if filters.category:
            query = query.filter(func.lower(Product.category) == filters.category.lower())
        if filters.min_price is not None:
            query = query.filter(Product.price >= filters.min_price)
        if filters.max_price is not None:
            query = query.filter(Product.price <= filters.max_price)
        if filters.min_rating is not None:
            query = query.filter(Product.average_rating >= filters.min_rating)
        return query

    @staticmethod
    def _ordered(query: Query, sort: ProductSort) -> Query:
        if sort is ProductSort.PRICE_ASC:
            query = query.order_by(Product.price.is_(None), Product.price.asc())
        elif sort is ProductSort.PRICE_DESC:
            query = query.order_by(Product.price.is_(None), Product.price.desc())
        elif sort is ProductSort.NEWEST:
            query = query.order_by(Product.created_at.desc())
        else:
            query = query.order_by(Product.average_rating.desc())
        return query.order_by(Product.id.asc())

    def list_products(
        self,
        filters: ProductFilters,
        sort: ProductSort = ProductSort.RATING_DESC,
        page: int = 1,
        limit: int = 20,
    ) -> ProductPage:
        """Search the catalog and return one page of results.

        Scalar criteria run in SQL. Tag and ingredient criteria compare JSON
        list members case-insensitively, so they are applied after loading the
        SQL-filtered candidates.
        """
        query = self._ordered(self._filtered_query(filters), sort)
        offset = (page - 1) * limit

        if not filters.filters_json:
            total = query.order_by(None).count()
            items = query.offset(offset).limit(limit).all()
            return ProductPage(items=items, total=total, page=page, limit=limit)

        matched = [product for product in query.all() if filters.matches_lists(product)]
        return ProductPage(
            items=matched[offset : offset + limit], total=len(matched), page=page, limit=limit
        )

    def get_product(self, product_id: int) -> Product | None:
        return self.db.query(Product).filter(Product.id == product_id).first()

    def get_local_by_barcode(self, barcode: str) -> Product | None:
        return self.db.query(Product).filter(Product.barcode == barcode).first()

    def create_product(self, data: ProductCreate) -> Product:
        """Add a product to the catalog; barcodes are unique when present."""
        if data.barcode and self.get_local_by_barcode(data.barcode) is not None:
            raise DuplicateError(
                "Product with this barcode already exists", code="DUPLICATE_ENTRY"
            )

        product = Product(**data.model_dump())
        self.db.add(product)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateError(
                "Product with this barcode already exists", code="DUPLICATE_ENTRY"
            ) from None
        self.db.refresh(product)
        logger.info(f"Created product {product.id} ({product.name})")
        return product

    def get_by_barcode(self, barcode: str) -> Product:
        """Find a product by barcode, importing it from the external database on a miss."""
        product = self.get_local_by_barcode(barcode)
        if product is not None:
            return product

        logger.info(f"Barcode {barcode} not in catalog, trying external lookup")
        external = self.lookup.fetch(barcode)
        if external is None:
            raise NotFoundError("Product not found")

        product = Product(
            barcode=external.barcode,
            name=external.name[:200],
            brand=external.brand[:100],
            category=external.category,
            description=external.description,
            image_url=external.image_url[:500] or None,
            ingredients=external.ingredients,
            tags=external.tags,
            price=external.price,
        )
        self.db.add(product)
        try:
            self.db.commit()
        except IntegrityError:
            # Imported concurrently by another request
            self.db.rollback()
            product = self.get_local_by_barcode(barcode)
            if product is None:
                raise NotFoundError("Product not found") from None
            return product

        self.db.refresh(product)
        logger.info(f"Imported product {product.id} for barcode {barcode}")
        return product

    def recommend_for(self, user: User) -> list[Product]:
        """Top rated products free of the user's allergens."""
        allergens = [name for name in user.allergens if name.strip()]
        query = self.db.query(Product).order_by(Product.average_rating.desc(), Product.id.asc())
        if not allergens:
            return query.limit(RECOMMENDATION_LIMIT).all()

        recommended = []
        for product in query:
            if any(product.contains_ingredient(name) for name in allergens):
                continue
            recommended.append(product)
            if len(recommended) == RECOMMENDATION_LIMIT:
                break
        return recommended
