"""Enumeration types for loan records."""

from enum import Enum


class ProductType(str, Enum):
    OTHER = "Other Products"
    TRACTOR = "Tractor"

    @classmethod
    def parse(cls, value: "str | ProductType") -> "ProductType":
        """Resolve a product label as typed in loan files."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        if key == "tractor":
            return cls.TRACTOR
        if key in ("other", "others", "other products", "other product"):
            return cls.OTHER
        raise ValueError(f"Unknown product type: {value!r}")


class RepaymentFrequency(str, Enum):
    MONTHLY = "Monthly"
    BIMONTHLY = "Bimonthly"
    QUARTERLY = "Quarterly"
    HALFYEARLY = "Halfyearly"

    @property
    def months_per_installment(self) -> int:
        return _MONTHS_PER_INSTALLMENT[self]

    @classmethod
    def parse(cls, value: "str | RepaymentFrequency") -> "RepaymentFrequency":
        """Resolve a frequency label, ignoring case, spaces and hyphens."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("-", "").replace(" ", "")
        for member in cls:
            if member.value.lower() == key:
                return member
        raise ValueError(f"Unknown repayment frequency: {value!r}")


_MONTHS_PER_INSTALLMENT = {
    RepaymentFrequency.MONTHLY: 1,
    RepaymentFrequency.BIMONTHLY: 2,
    RepaymentFrequency.QUARTERLY: 3,
    RepaymentFrequency.HALFYEARLY: 6,
}
