"""Core enums and type definitions."""

from enum import StrEnum


class FieldKind(StrEnum):
    """How a searchable field is indexed."""

    EXACT = "exact"  # keyword: exact, substring and prefix matching
    TEXT = "text"  # analyzed free text: fuzzy-capable match


class MatchTier(StrEnum):
    """Matching strategies that contribute to relevance."""

    EXACT = "exact"
    SUBSTRING = "substring"
    FUZZY = "fuzzy"
    AUTOCOMPLETE = "autocomplete"
    PREFIX = "prefix"


class SortOrder(StrEnum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class Fuzziness(StrEnum):
    """Permitted edit distance for free-text matching."""

    AUTO = "AUTO"
    ZERO = "0"
    ONE = "1"
    TWO = "2"


class TotalRelation(StrEnum):
    """Whether a reported hit total is exact or a lower bound."""

    EQ = "eq"
    GTE = "gte"


class ChangeOperation(StrEnum):
    """Kinds of record store change events."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
