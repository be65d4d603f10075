"""
Shared pytest fixtures for the tutor tests.
"""

import pytest

from tutor.domain.tool.tool_registry import ToolRegistry

from tests.doubles import StaticMemory, check_student_progress, explode


@pytest.fixture
def registry() -> ToolRegistry:
    """Registry with one working and one failing tool."""
    return ToolRegistry([check_student_progress, explode])


@pytest.fixture
def memory() -> StaticMemory:
    return StaticMemory(
        memory=["Student struggled with carrying digits", "Student likes analogies"],
        worldview=["Learning is building, one brick at a time"]
    )
