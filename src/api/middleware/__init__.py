"""Middlewares HTTP da API."""

from api.middleware.access_log import AccessLogMiddleware, mask_relay_path

__all__ = ["AccessLogMiddleware", "mask_relay_path"]
