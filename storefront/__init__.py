"""
                Spicy Biryani Storefront

Backend for the Spicy Biryani ordering storefront: support chatbot,
order status notifications (email/SMS) and the admin session flag.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
