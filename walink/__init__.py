"""Candidate outreach link generator.

Turns loosely structured candidate spreadsheets into personalized WhatsApp
deep links, classified into usable / missing JD link / invalid phone buckets.
"""

__version__ = "0.1.0"
