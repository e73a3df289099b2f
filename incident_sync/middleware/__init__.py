"""HTTP exception handlers."""
