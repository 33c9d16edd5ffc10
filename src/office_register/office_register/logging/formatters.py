"""JSON formatter for application logs."""
import json
import logging
import os
from datetime import datetime

SERVICE_NAME = "office-register"


class AppLogsJSONFormatter(logging.Formatter):
    def __init__(self, environment: str | None = None):
        super().__init__()
        self.application_environment = environment or os.getenv("APP_ENV", "development")

    def format(self, record):
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line_number': record.lineno,
            'environment': self.application_environment,
            'service': SERVICE_NAME,
            'request_id': getattr(record, 'request_id', ''),
            'request_method': getattr(record, 'request_method', ''),
            'request_path': getattr(record, 'request_path', ''),
        }

        if record.exc_info:
            log_entry['exception'] = str(record.exc_info[1])
            log_entry['traceback'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] [%(request_id)s] %(message)s"
