"""
Vendor trust pipeline package.

Holds the scoring stage that derives metrics and badges from contacts.
"""
