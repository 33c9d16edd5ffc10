"""Logging filters that attach Flask request context to records."""
import logging

from flask import g, has_request_context, request


class RequestContextFilter(logging.Filter):
    def filter(self, record):
        if has_request_context():
            record.request_id = getattr(g, 'request_id', '')
            record.request_method = request.method
            record.request_path = request.path
        else:
            record.request_id = getattr(record, 'request_id', '-')
            record.request_method = getattr(record, 'request_method', '')
            record.request_path = getattr(record, 'request_path', '')
        return True
