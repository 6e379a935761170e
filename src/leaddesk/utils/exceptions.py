"""
Custom exception classes
"""
from fastapi import HTTPException, status


class CSVParseError(HTTPException):
    """Exception raised when an uploaded file cannot be decoded as CSV"""
    def __init__(self, detail: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=detail)


class ValidationError(HTTPException):
    """Exception raised for validation errors"""
    def __init__(self, detail: str, status_code: int = status.HTTP_422_UNPROCESSABLE_ENTITY):
        super().__init__(status_code=status_code, detail=detail)


class NotFoundError(HTTPException):
    """Exception raised when a category or lead does not exist"""
    def __init__(self, detail: str, status_code: int = status.HTTP_404_NOT_FOUND):
        super().__init__(status_code=status_code, detail=detail)


class DatabaseError(HTTPException):
    """Exception raised for database errors"""
    def __init__(self, detail: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        super().__init__(status_code=status_code, detail=detail)


class StoreError(DatabaseError):
    """Exception raised when a lead store round trip fails"""
    def __init__(self, operation: str, detail: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        self.operation = operation
        super().__init__(detail=f"{operation} failed: {detail}", status_code=status_code)
