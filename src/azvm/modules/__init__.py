"""azvm modules - Self-contained bricks following the brick philosophy

Each module is a self-contained component with clear contracts:
- Prerequisites Checker: Verify the Azure CLI is installed
- Progress Display: Show status lines and elapsed time
"""

from . import prerequisites, progress

__all__ = ["prerequisites", "progress"]
