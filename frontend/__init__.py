"""PharmaDesk Frontend Package.

Streamlit administration frontend for the pharmacy master data with:
- Frozen dataclass configuration
- Backend API client and variant gateway
- Session state and variant form state management
- Reusable UI components
- Page-based routing
"""

__version__ = "1.0.0"
