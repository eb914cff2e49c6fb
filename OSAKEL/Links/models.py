# Links/models.py
from pydantic import BaseModel, Field, model_validator
from typing import Literal, Optional


class DrinkShopLink(BaseModel):
    id: str  # Firestore document ID: {drinkId}_{shopId}
    drinkId: str
    shopId: str
    price: int = Field(..., ge=0)
    isAvailable: bool = True
    note: str = ""

    @classmethod
    def build_id(cls, drink_id: str, shop_id: str) -> str:
        return f"{drink_id}_{shop_id}"


class LinkGenerationConfig(BaseModel):
    mode: Literal["random", "all", "custom"] = "random"
    min_drinks_per_shop: Optional[int] = Field(default=None, ge=1)
    max_drinks_per_shop: Optional[int] = Field(default=None, ge=1)

    @model_validator(mode="after")
    def check_bounds(self):
        if self.mode == "random":
            if self.min_drinks_per_shop is None:
                self.min_drinks_per_shop = 3
            if self.max_drinks_per_shop is None:
                self.max_drinks_per_shop = 8
        elif self.mode == "custom" and self.min_drinks_per_shop is None:
            self.min_drinks_per_shop = 1

        if (
            self.min_drinks_per_shop is not None
            and self.max_drinks_per_shop is not None
            and self.min_drinks_per_shop > self.max_drinks_per_shop
        ):
            raise ValueError(
                f"min_drinks_per_shop ({self.min_drinks_per_shop}) exceeds "
                f"max_drinks_per_shop ({self.max_drinks_per_shop})"
            )
        return self

    def bounds(self, drinks_count: int):
        """(min, max) per shop; custom mode without a max uses every drink."""
        low = self.min_drinks_per_shop or 1
        high = self.max_drinks_per_shop if self.max_drinks_per_shop is not None else drinks_count
        return low, max(low, high)

    def estimated_total(self, shops_count: int, drinks_count: int) -> float:
        if self.mode == "all":
            return shops_count * drinks_count
        low, high = self.bounds(drinks_count)
        return shops_count * (min(low, drinks_count) + min(high, drinks_count)) / 2
