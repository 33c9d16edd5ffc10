"""Office sign-in register.

Members prove ownership of their email with a one-time passcode and sign in/out,
producing visit records; admins manage the roster and watch who is in the office.
Organized by feature modules with Protocol repositories, use-case services and a thin
Flask JSON layer.
"""
