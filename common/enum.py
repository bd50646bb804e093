import enum


class EntryCategoryEnum(str, enum.Enum):
    INCOME = "income"
    EXPENSE = "expense"
