from enum import Enum


class ExportFormat(Enum):
    CSV = "csv"
    JSON = "json"
    MARKDOWN = "markdown"
    SQLITE = "sqlite"

    @property
    def extension(self) -> str:
        return {
            ExportFormat.CSV: ".csv",
            ExportFormat.JSON: ".json",
            ExportFormat.MARKDOWN: ".md",
            ExportFormat.SQLITE: ".sqlite",
        }[self]
