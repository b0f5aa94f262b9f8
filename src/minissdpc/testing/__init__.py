from .asserts import assert_true_soon, assert_equal_soon
from .servers import (
    MockDaemon,
    make_mock_daemon,
    service_stream,
    example_services,
    example_service_stream,
)
