"""
Stall directory.

Responsibilities:
- Load the stall catalogue and seed reviews into memory.
- Answer nearby-stall searches and stall-detail lookups.
- Accept, edit and delete user reviews (checklist answers become hygiene tags).
- Attach a freshly computed hygiene score to every stall returned.
"""
