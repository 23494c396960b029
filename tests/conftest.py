import pytest
import sys
from pathlib import Path

# Add src to sys.path so we can import ringing_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from ringing_toolkit.core.models.method import FullClass, Method, MethodClass
from ringing_toolkit.core.models.stage import Stage


# Common test fixtures
@pytest.fixture
def doubles() -> Stage:
    return Stage(5)


@pytest.fixture
def minor() -> Stage:
    return Stage(6)


@pytest.fixture
def plain_bob_doubles(doubles) -> Method:
    """Plain Bob Doubles: 10-row lead, 4 leads to the course."""
    return Method.from_notation(
        "Plain", "-0-0-,01", doubles, full_class=FullClass(MethodClass.BOB)
    )


@pytest.fixture
def plain_bob_minor(minor) -> Method:
    return Method.from_notation(
        "Plain", "-05-05-05,01", minor, full_class=FullClass(MethodClass.BOB)
    )


@pytest.fixture
def grandsire_doubles(doubles) -> Method:
    return Method.from_notation(
        "Grandsire", "2,0.4.0.4.0", doubles,
        full_class=FullClass(MethodClass.BOB), title="Grandsire Doubles",
    )


@pytest.fixture
def cambridge_minor(minor) -> Method:
    return Method.from_notation(
        "Cambridge", "&-25-03-01-25-03-45,01", minor,
        full_class=FullClass(MethodClass.SURPRISE),
    )


@pytest.fixture
def false_minimus() -> Method:
    """A lead that rings rounds twice before its lead end."""
    return Method.from_notation("Broken", "-.-.03", Stage(4))
