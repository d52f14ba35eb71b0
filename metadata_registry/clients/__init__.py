from .http_client import JSON_HEADERS, ApiCaller, HttpApiCaller

__all__ = ["ApiCaller", "HttpApiCaller", "JSON_HEADERS"]
