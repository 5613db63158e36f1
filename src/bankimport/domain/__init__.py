"""Domain layer for bankimport application."""

__all__ = [
    "TransactionService",
    "CategoryService",
    "CSVImportService",
    "AccountService",
    "MappingTemplateService",
]


# Import services lazily; the database layer imports domain.entities
def __getattr__(name):
    if name == "TransactionService":
        from bankimport.domain.transaction import TransactionService
        return TransactionService
    if name == "CategoryService":
        from bankimport.domain.category import CategoryService
        return CategoryService
    if name == "CSVImportService":
        from bankimport.domain.csv_import import CSVImportService
        return CSVImportService
    if name == "AccountService":
        from bankimport.domain.account import AccountService
        return AccountService
    if name == "MappingTemplateService":
        from bankimport.domain.mapping_template import MappingTemplateService
        return MappingTemplateService
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
