"""
Application error taxonomy.

Every error carries the HTTP status it maps to and a user-facing Vietnamese
message. The exception handlers registered in ``noitro.main`` turn them into
the ``{"success": false, "message": ...}`` envelope.
"""
from fastapi import status


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Lỗi hệ thống, vui lòng thử lại sau"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or empty required input."""
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Dữ liệu không hợp lệ"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Bạn không có quyền thực hiện thao tác này"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Không tìm thấy dữ liệu"


class ConflictError(AppError):
    """A uniqueness constraint rejected a concurrent write."""
    status_code = status.HTTP_409_CONFLICT
    message = "Thao tác đang được xử lý, vui lòng thử lại"


class InternalError(AppError):
    pass


class UnavailableError(AppError):
    """Backing store or object storage unreachable or not configured."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "Dịch vụ tạm thời không khả dụng"
