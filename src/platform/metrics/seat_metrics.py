from collections.abc import Iterator
from contextlib import contextmanager
import time

from prometheus_client import Counter, Gauge, Histogram

from src.platform.exception.exceptions import CustomBaseError


class SeatMetrics:
    """
    Seat Reservation Core Metrics Collector

    Tracks command outcomes (hold/release/purchase) and observer fan-out health
    """

    def __init__(self):
        # ========== Seat Command Metrics ==========
        self.seat_commands = Counter(
            'seat_commands_total',
            'Total seat commands',
            ['operation', 'result'],  # operation: hold/release/purchase
        )

        self.seat_command_duration = Histogram(
            'seat_command_duration_seconds',
            'Seat command processing time',
            ['operation'],
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0],
        )

        # ========== Broadcast Metrics ==========
        self.observer_connections = Gauge(
            'observer_connections', 'Live WebSocket observers registered with the hub'
        )

        self.broadcast_deliveries = Counter(
            'broadcast_deliveries_total',
            'Per-connection broadcast deliveries',
            ['result'],  # delivered/failed
        )

    # ========== Helper Methods ==========

    def record_seat_command(self, *, operation: str, result: str, duration: float) -> None:
        self.seat_commands.labels(operation=operation, result=result).inc()
        self.seat_command_duration.labels(operation=operation).observe(duration)

    @contextmanager
    def track_seat_command(self, *, operation: str) -> Iterator[None]:
        """Record outcome and duration: success, rejected (4xx) or error (5xx / unexpected)"""
        start = time.perf_counter()
        result = 'success'
        try:
            yield
        except CustomBaseError as e:
            result = 'rejected' if e.status_code < 500 else 'error'
            raise
        except Exception:
            result = 'error'
            raise
        finally:
            self.record_seat_command(
                operation=operation, result=result, duration=time.perf_counter() - start
            )

    def record_delivery(self, *, delivered: bool) -> None:
        self.broadcast_deliveries.labels(result='delivered' if delivered else 'failed').inc()


# Global metrics instance
metrics = SeatMetrics()
