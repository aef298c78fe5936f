# cartstore/domain/schemas.py
from pydantic import BaseModel, ConfigDict, Field


class ProductRef(BaseModel):
    """Produkt dodawany do koszyka (bez ilosci)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    title: str
    image_url: str = Field(..., alias="imageUrl")
    unit_price: float = Field(..., ge=0, alias="unitPrice")


class LineItem(ProductRef):
    """Pozycja w koszyku, quantity zawsze >= 1."""

    quantity: int = Field(..., ge=1, description="Ilosc produktu (musi byc >= 1)")

    @classmethod
    def from_product(cls, product: ProductRef, quantity: int = 1) -> "LineItem":
        return cls(
            id=product.id,
            title=product.title,
            image_url=product.image_url,
            unit_price=product.unit_price,
            quantity=quantity,
        )
