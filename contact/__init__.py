"""
Contact App

Public contact form for the farm website:
- Submissions are validated, sanitized and stored
- The farm owner is notified by email
- The submitter gets an auto-reply
- A test endpoint checks the outgoing email configuration
"""
