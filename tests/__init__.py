# Tests for spin_motion
#
# Test organization mirrors source structure:
#   - test_primitives/: Unit tests for actions, time spans and spin selectors
#   - test_motion/: Tests for Motion, MotionList algebra and coordinate evaluation
#
# Running tests:
#   pytest tests/
#   pytest tests/test_motion/ -v
#   pytest tests/ -k "composable"
