"""Domain services built on top of the stores.

Services hold logic that spans more than a single store call (hashing,
token issuance) and accept their store dependencies explicitly.
"""
