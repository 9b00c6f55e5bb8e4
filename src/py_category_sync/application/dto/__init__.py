from .models import (
    BatchCreateReportDTO,
    BootstrapStatusDTO,
    CategoryListDTO,
    CreateFailureDTO,
    SyncStatusDTO,
)

__all__ = [
    "CreateFailureDTO",
    "BatchCreateReportDTO",
    "CategoryListDTO",
    "BootstrapStatusDTO",
    "SyncStatusDTO",
]
