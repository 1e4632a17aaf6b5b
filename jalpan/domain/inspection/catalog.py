"""
Category Catalog

Ordered inspection categories, the fixed corrective-action phrases and the
per-category sub-item configuration.

The marker substrings are matched once, when a CategoryConfig is built;
everything downstream looks configs up by exact category name.
"""
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field


FOOD_CATEGORIES: List[str] = [
    "Breakfast",
    "Tea/Coffee",
    "Roti/Dal, Subzi",
    "Kadhi/Rajma Chawal",
    "Bread Pakoda/Snacks",
    "Dessert/Sweet Dish",
    "Special Counter",
    "Salad/Raita",
    "Drinking Water & Hygiene",
]

CORRECTIVE_ACTIONS: List[str] = [
    "Informed the Counter Incharge",
    "Item replaced with a fresh batch",
    "Food reheated to serving temperature",
    "Counter cleaned and sanitized",
    "Kitchen team briefed on quality standards",
    "Escalated to the Jalpan coordinator",
]

# marker substrings
DESSERT_MARKER = "Dessert"
SPECIAL_COUNTER_MARKER = "Special Counter"
ROTI_DAL_MARKER = "Roti/Dal, Subzi"
SNACKS_MARKER = "Bread Pakoda/Snacks"
KADHI_RAJMA_MARKER = "Kadhi/Rajma Chawal"

DAL_CHOICE = "Dal"
SUBZI_CHOICE = "Subzi"
KADHI_RAJMA_CHOICES: Tuple[str, ...] = ("Kadhi Chawal", "Rajma Chawal", "Biryani")


class SubItemMode(str, Enum):
    """How a category captures its sub-item"""
    NONE = "none"
    FREE_TEXT = "free_text"
    CHOICE = "choice"
    DAL_OR_SUBZI = "dal_or_subzi"


class CategoryConfig(BaseModel):
    """Per-category sub-item capabilities"""
    name: str = Field(..., description="Category name")
    requires_sub_item: bool = Field(False, description="Sub-item must be filled before finalize")
    sub_item_mode: SubItemMode = Field(SubItemMode.NONE, description="Input affordance")
    sub_item_choices: Tuple[str, ...] = Field(default=(), description="Fixed choices")
    sub_item_waiver_value: Optional[str] = Field(None, description="Value that waives the free-text requirement")
    placeholder: str = Field("", description="Input hint shown by clients")

    @property
    def accepts_free_text(self) -> bool:
        return self.sub_item_mode in (SubItemMode.FREE_TEXT, SubItemMode.DAL_OR_SUBZI)


def build_category_config(name: str) -> CategoryConfig:
    """
    Derive the configuration record for a category name

    Args:
        name: category name from the catalog

    Returns:
        CategoryConfig
    """
    if ROTI_DAL_MARKER in name:
        return CategoryConfig(
            name=name,
            requires_sub_item=True,
            sub_item_mode=SubItemMode.DAL_OR_SUBZI,
            sub_item_choices=(DAL_CHOICE, SUBZI_CHOICE),
            sub_item_waiver_value=DAL_CHOICE,
            placeholder="What specific Subzi is prepared? *",
        )

    if KADHI_RAJMA_MARKER in name:
        return CategoryConfig(
            name=name,
            sub_item_mode=SubItemMode.CHOICE,
            sub_item_choices=KADHI_RAJMA_CHOICES,
        )

    if SNACKS_MARKER in name:
        # accepts a food name but never requires one
        return CategoryConfig(
            name=name,
            sub_item_mode=SubItemMode.FREE_TEXT,
            placeholder="Food name (Optional)",
        )

    if SPECIAL_COUNTER_MARKER in name:
        return CategoryConfig(
            name=name,
            requires_sub_item=True,
            sub_item_mode=SubItemMode.FREE_TEXT,
            placeholder="What is the Special Dish today? *",
        )

    if DESSERT_MARKER in name:
        return CategoryConfig(
            name=name,
            requires_sub_item=True,
            sub_item_mode=SubItemMode.FREE_TEXT,
            placeholder=f"What is the name of {name.split('/')[0]}? *",
        )

    return CategoryConfig(name=name)


class CategoryCatalog:
    """Ordered categories, corrective-action phrases and their configs"""

    def __init__(
        self,
        categories: Optional[Sequence[str]] = None,
        corrective_actions: Optional[Sequence[str]] = None
    ):
        self.categories: List[str] = list(categories if categories is not None else FOOD_CATEGORIES)
        self.corrective_actions: List[str] = list(
            corrective_actions if corrective_actions is not None else CORRECTIVE_ACTIONS
        )
        if len(set(self.categories)) != len(self.categories):
            raise ValueError("Category names must be unique")
        self._configs: Dict[str, CategoryConfig] = {
            name: build_category_config(name) for name in self.categories
        }

    def is_known(self, category: str) -> bool:
        return category in self._configs

    def config_for(self, category: str) -> CategoryConfig:
        """Config for an exact category name; unknown names get a plain config"""
        config = self._configs.get(category)
        if config is None:
            return CategoryConfig(name=category)
        return config

    def configs(self) -> List[CategoryConfig]:
        return [self._configs[name] for name in self.categories]


_catalog: Optional[CategoryCatalog] = None


def get_catalog() -> CategoryCatalog:
    """Shared default catalog"""
    global _catalog
    if _catalog is None:
        _catalog = CategoryCatalog()
    return _catalog
