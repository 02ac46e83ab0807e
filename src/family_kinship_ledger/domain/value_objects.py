from dataclasses import dataclass
from datetime import date
from enum import Enum

from dateutil.relativedelta import relativedelta


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class VitalStatus(str, Enum):
    ALIVE = "alive"
    DECEASED = "deceased"
    MISSING = "missing"


class VerificationStatus(str, Enum):
    UNVERIFIED = "unverified"
    PENDING_VERIFICATION = "pending_verification"
    VERIFIED = "verified"
    REJECTED = "rejected"
    DISPUTED = "disputed"


class MarriageType(str, Enum):
    CIVIL = "civil"
    CHRISTIAN = "christian"
    CUSTOMARY = "customary"
    ISLAMIC = "islamic"
    HINDU = "hindu"
    OTHER = "other"

    @property
    def is_monogamous(self) -> bool:
        return self in (MarriageType.CIVIL, MarriageType.CHRISTIAN, MarriageType.HINDU)

    @property
    def is_registrable(self) -> bool:
        return self in (MarriageType.CIVIL, MarriageType.CHRISTIAN)


class MarriageStatus(str, Enum):
    MARRIED = "married"
    SEPARATED = "separated"
    DIVORCED = "divorced"
    WIDOWED = "widowed"


class MarriageEndReason(str, Enum):
    DEATH_OF_SPOUSE = "death_of_spouse"
    DIVORCE = "divorce"
    ANNULMENT = "annulment"
    CUSTOMARY_DISSOLUTION = "customary_dissolution"
    SEPARATION = "separation"


class RelationshipType(str, Enum):
    SPOUSE = "spouse"
    EX_SPOUSE = "ex_spouse"
    CHILD = "child"
    ADOPTED_CHILD = "adopted_child"
    STEPCHILD = "stepchild"
    PARENT = "parent"
    SIBLING = "sibling"
    HALF_SIBLING = "half_sibling"
    GRANDCHILD = "grandchild"
    GRANDPARENT = "grandparent"
    NIECE_NEPHEW = "niece_nephew"
    AUNT_UNCLE = "aunt_uncle"
    COUSIN = "cousin"
    GUARDIAN = "guardian"
    OTHER = "other"

    @property
    def inverse(self) -> "RelationshipType":
        return _INVERSE_RELATIONSHIPS.get(self, self)

    @property
    def is_parent_to_child(self) -> bool:
        """PARENT edges point from the parent to the child."""
        return self is RelationshipType.PARENT

    @property
    def is_child_to_parent(self) -> bool:
        """CHILD and ADOPTED_CHILD edges point from the child to the parent."""
        return self in (RelationshipType.CHILD, RelationshipType.ADOPTED_CHILD)

    @property
    def is_lineage(self) -> bool:
        return self.is_parent_to_child or self.is_child_to_parent


_INVERSE_RELATIONSHIPS: dict[RelationshipType, RelationshipType] = {
    RelationshipType.CHILD: RelationshipType.PARENT,
    RelationshipType.ADOPTED_CHILD: RelationshipType.PARENT,
    RelationshipType.STEPCHILD: RelationshipType.PARENT,
    RelationshipType.PARENT: RelationshipType.CHILD,
    RelationshipType.GRANDPARENT: RelationshipType.GRANDCHILD,
    RelationshipType.GRANDCHILD: RelationshipType.GRANDPARENT,
    RelationshipType.AUNT_UNCLE: RelationshipType.NIECE_NEPHEW,
    RelationshipType.NIECE_NEPHEW: RelationshipType.AUNT_UNCLE,
    RelationshipType.GUARDIAN: RelationshipType.OTHER,
}


class VerificationLevel(str, Enum):
    UNVERIFIED = "unverified"
    PARTIALLY_VERIFIED = "partially_verified"
    FULLY_VERIFIED = "fully_verified"
    DISPUTED = "disputed"

    @classmethod
    def from_score(cls, score: int) -> "VerificationLevel":
        if score >= 90:
            return cls.FULLY_VERIFIED
        if score >= 70:
            return cls.PARTIALLY_VERIFIED
        if score >= 30:
            return cls.UNVERIFIED
        return cls.DISPUTED


class VerificationMethod(str, Enum):
    DNA = "dna"
    DOCUMENT = "document"
    FAMILY_CONSENSUS = "family_consensus"
    COURT_ORDER = "court_order"
    TRADITIONAL = "traditional"


class LawSection(str, Enum):
    """Sections of the Law of Succession Act (Cap. 160) that ground a record."""

    S26_DEPENDANT_PROVISION = "s26"
    S29_DEPENDANTS = "s29"
    S35_SPOUSAL_CHILDS_SHARE = "s35"
    S40_POLYGAMY = "s40"
    S45_DEBTS_PRIORITY = "s45"
    S70_TESTAMENTARY_GUARDIAN = "s70"
    S71_COURT_GUARDIAN = "s71"
    S72_GUARDIAN_BOND = "s72"
    S73_GUARDIAN_ACCOUNTS = "s73"
    S83_EXECUTOR_DUTIES = "s83"


class CohabitationType(str, Enum):
    COME_WE_STAY = "come_we_stay"
    LONG_TERM_PARTNERSHIP = "long_term_partnership"
    DATING = "dating"
    ENGAGED = "engaged"


class CohabitationStability(str, Enum):
    STABLE = "stable"
    VOLATILE = "volatile"
    ON_OFF = "on_off"
    UNKNOWN = "unknown"


class AdoptionType(str, Enum):
    STATUTORY = "statutory"
    CUSTOMARY = "customary"
    INTERNATIONAL = "international"
    KINSHIP = "kinship"
    FOSTER_TO_ADOPT = "foster_to_adopt"
    STEP_PARENT = "step_parent"
    RELATIVE = "relative"


class AdoptionStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    FINALIZED = "finalized"
    REVOKED = "revoked"
    ANNULLED = "annulled"
    APPEALED = "appealed"


class ParentalConsentStatus(str, Enum):
    CONSENTED = "consented"
    WITHHELD = "withheld"
    UNKNOWN = "unknown"
    DECEASED = "deceased"
    TERMINATED = "terminated"


class HouseEstablishmentType(str, Enum):
    CUSTOMARY = "customary"
    ISLAMIC = "islamic"
    TRADITIONAL = "traditional"
    COURT_RECOGNIZED = "court_recognized"


class HouseDissolutionReason(str, Enum):
    WIFE_DECEASED = "wife_deceased"
    WIFE_DIVORCED = "wife_divorced"
    HOUSE_MERGED = "house_merged"
    COURT_ORDER = "court_order"


class KenyanCounty(str, Enum):
    BARINGO = "baringo"
    BOMET = "bomet"
    BUNGOMA = "bungoma"
    BUSIA = "busia"
    ELGEYO_MARAKWET = "elgeyo_marakwet"
    EMBU = "embu"
    GARISSA = "garissa"
    HOMA_BAY = "homa_bay"
    ISIOLO = "isiolo"
    KAJIADO = "kajiado"
    KAKAMEGA = "kakamega"
    KERICHO = "kericho"
    KIAMBU = "kiambu"
    KILIFI = "kilifi"
    KIRINYAGA = "kirinyaga"
    KISII = "kisii"
    KISUMU = "kisumu"
    KITUI = "kitui"
    KWALE = "kwale"
    LAIKIPIA = "laikipia"
    LAMU = "lamu"
    MACHAKOS = "machakos"
    MAKUENI = "makueni"
    MANDERA = "mandera"
    MARSABIT = "marsabit"
    MERU = "meru"
    MIGORI = "migori"
    MOMBASA = "mombasa"
    MURANGA = "muranga"
    NAIROBI = "nairobi"
    NAKURU = "nakuru"
    NANDI = "nandi"
    NAROK = "narok"
    NYAMIRA = "nyamira"
    NYANDARUA = "nyandarua"
    NYERI = "nyeri"
    SAMBURU = "samburu"
    SIAYA = "siaya"
    TAITA_TAVETA = "taita_taveta"
    TANA_RIVER = "tana_river"
    THARAKA_NITHI = "tharaka_nithi"
    TRANS_NZOIA = "trans_nzoia"
    TURKANA = "turkana"
    UASIN_GISHU = "uasin_gishu"
    VIHIGA = "vihiga"
    WAJIR = "wajir"
    WEST_POKOT = "west_pokot"


@dataclass(frozen=True)
class PersonName:
    first: str
    last: str
    middle: str | None = None
    maiden: str | None = None

    def __post_init__(self) -> None:
        if not self.first.strip() or not self.last.strip():
            raise ValueError("First and last name are required")

    @property
    def full_name(self) -> str:
        parts = [self.first, self.middle, self.last]
        return " ".join(part for part in parts if part)

    def __str__(self) -> str:
        return self.full_name


def age_on(date_of_birth: date, on_date: date) -> int:
    """Whole years between date_of_birth and on_date.

    A 29 February birthday falls on 28 February in common years.
    """
    return relativedelta(on_date, date_of_birth).years


def years_between(start: date, end: date) -> int:
    return relativedelta(end, start).years
