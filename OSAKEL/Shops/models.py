# Shops/models.py
from pydantic import BaseModel, Field
from typing import List, Optional


class Shop(BaseModel):
    id: str  # Firestore document ID
    name: str = Field(..., min_length=1, max_length=100)
    address: str
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    category: str
    openTime: Optional[str] = None
    openHours: Optional[str] = None
    imageUrl: Optional[str] = None
    imageUrls: List[str] = []
    drinkIds: List[str] = []
    drink_categories: List[str] = []
