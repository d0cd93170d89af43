import time
import functools
import logging
import uuid
from collections import deque
from contextvars import ContextVar
from typing import Any, Callable, Dict, Optional
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
import inspect

logger = logging.getLogger(__name__)

HISTOGRAM_WINDOW = 1000

_current_trace: ContextVar[Optional["TraceContext"]] = ContextVar("current_trace", default=None)


class MetricType(str, Enum):
    COUNTER = "counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"


@dataclass
class TraceContext:
    trace_id: str
    span_id: str
    parent_id: Optional[str] = None
    start_time: float = 0
    tags: Dict[str, Any] = field(default_factory=dict)


class Monitoring:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._metrics_registry = {}
        self._tracing_enabled = False
        self._initialized = True

        logger.info("Monitoring system initialized")

    def enable_tracing(self, enabled: bool = True):
        self._tracing_enabled = enabled
        logger.info(f"Tracing {'enabled' if enabled else 'disabled'}")

    def record_metric(
        self,
        name: str,
        value: float = 1.0,
        metric_type: MetricType = MetricType.COUNTER,
        tags: Optional[Dict[str, str]] = None,
    ):
        if tags is None:
            tags = {}

        metric_key = f"{name}_{'_'.join(f'{k}_{v}' for k, v in sorted(tags.items()))}".rstrip("_")

        if metric_type == MetricType.COUNTER:
            self._metrics_registry[metric_key] = self._metrics_registry.get(metric_key, 0) + value
        elif metric_type == MetricType.GAUGE:
            self._metrics_registry[metric_key] = value
        elif metric_type == MetricType.HISTOGRAM:
            self._metrics_registry.setdefault(metric_key, deque(maxlen=HISTOGRAM_WINDOW)).append(value)

        logger.debug(f"Metric recorded: {name}={value} ({metric_type.value})")

    def get_metrics(self) -> Dict[str, Any]:
        return self._metrics_registry.copy()

    def clear_metrics(self):
        self._metrics_registry.clear()

    @contextmanager
    def trace_span(self, name: str, tags: Optional[Dict[str, Any]] = None):
        if not self._tracing_enabled:
            yield None
            return

        parent_trace = _current_trace.get()
        trace = TraceContext(
            trace_id=parent_trace.trace_id if parent_trace else self._generate_id(),
            span_id=self._generate_id(),
            parent_id=parent_trace.span_id if parent_trace else None,
            start_time=time.time(),
            tags=dict(tags or {}),
        )
        token = _current_trace.set(trace)

        try:
            logger.debug(f"Starting span: {name} (trace_id: {trace.trace_id}, span_id: {trace.span_id})")
            yield trace
        except Exception as e:
            trace.tags["error"] = type(e).__name__
            raise
        finally:
            duration = time.time() - trace.start_time
            self.record_metric(
                name=f"span_duration_{name}",
                value=duration,
                metric_type=MetricType.HISTOGRAM,
                tags={"success": "error" not in trace.tags},
            )
            logger.debug(f"Finished span: {name} (duration: {duration:.3f}s)")
            _current_trace.reset(token)

    def _generate_id(self) -> str:
        return str(uuid.uuid4())[:8]


monitoring = Monitoring()


def _monitored(prefix: str, operation_name: str):
    def decorator(func: Callable):
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"{func.__name__} must be a coroutine function to be monitored")

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = time.time()

            with monitoring.trace_span(f"{prefix}_{operation_name}"):
                try:
                    result = await func(*args, **kwargs)
                    monitoring.record_metric(
                        name=f"{prefix}_{operation_name}_calls",
                        tags={"status": "success"}
                    )
                    return result
                except Exception as e:
                    monitoring.record_metric(
                        name=f"{prefix}_{operation_name}_calls",
                        tags={"status": "error", "error": type(e).__name__}
                    )
                    raise
                finally:
                    duration = time.time() - start_time
                    monitoring.record_metric(
                        name=f"{prefix}_{operation_name}_duration",
                        value=duration,
                        metric_type=MetricType.HISTOGRAM
                    )

        return async_wrapper
    return decorator


def monitor_service_call(service_name: str):
    return _monitored("service", service_name)


def monitor_db_operation(operation_name: str):
    return _monitored("db", operation_name)


def record_response_time(path: str, duration: float):
    monitoring.record_metric(
        name=f"response_time_{path}",
        value=duration,
        metric_type=MetricType.HISTOGRAM
    )


def record_business_metric(
    metric_name: str,
    value: float = 1.0,
    tags: Optional[Dict[str, str]] = None
):
    monitoring.record_metric(
        name=f"business_{metric_name}",
        value=value,
        tags=tags or {}
    )
