"""
Domain records for a single estimation request.

All records are frozen: an IndicatorSet is built fresh from the form,
checked once, and then only read.
"""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


TIPE_KABUPATEN = "kabupaten"
TIPE_KOTA = "kota"
TIPE_DEFAULT = "lainnya"


@dataclass(frozen=True)
class IndicatorSet:
    """
    Regional indicators in base units (rupiah, jiwa).

    Amounts entered in millions are scaled by the input parser before
    they reach this record.
    """
    pad: float = 0.0
    dau: float = 0.0
    dak: float = 0.0
    dbh: float = 0.0
    belanja: float = 0.0
    pendapatan: float = 0.0
    temuan: float = 0.0
    penduduk: float = 0.0
    asn: float = 0.0
    pdrb: float = 0.0
    usia: float = 0.0
    jawa: float = 0.0
    tipe: str = TIPE_DEFAULT

    @property
    def dummy_kab(self) -> int:
        return 1 if self.tipe == TIPE_KABUPATEN else 0

    @property
    def dummy_kota(self) -> int:
        return 1 if self.tipe == TIPE_KOTA else 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["dummy_kab"] = self.dummy_kab
        data["dummy_kota"] = self.dummy_kota
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IndicatorSet":
        # Filter only known fields
        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in known_fields}
        return cls(**filtered)


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of the positivity gate.

    A valid result carries the derived total transfer and ratio so the
    estimator does not recompute them; an invalid one carries every
    failing display name in check order.
    """
    valid: bool
    failures: List[str] = field(default_factory=list)
    total_transfer: Optional[float] = None
    rasio: Optional[float] = None

    @classmethod
    def ok(cls, total_transfer: float, rasio: float) -> "ValidationResult":
        return cls(valid=True, total_transfer=total_transfer, rasio=rasio)

    @classmethod
    def invalid(
        cls,
        failures: List[str],
        total_transfer: Optional[float] = None,
        rasio: Optional[float] = None,
    ) -> "ValidationResult":
        return cls(
            valid=False,
            failures=list(failures),
            total_transfer=total_transfer,
            rasio=rasio,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class EstimationResult:
    """Both regression estimates; no rounding applied."""
    corruption_estimate: float
    hdi_estimate: float
    ln_corruption_estimate: float
    corruption_terms: Dict[str, float] = field(default_factory=dict)
    hdi_terms: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
