"""
Cross-app test suite for the Farm Management backend.

Test Organization:
- integration/ - Multi-step API scenarios spanning several endpoints
- App-specific tests remain in their respective app directories (e.g., feed_inventory/tests.py)
"""
