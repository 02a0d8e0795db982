"""core/ -- Configuration and logging setup for TokenAuth.

Layer rule: core/ is the kernel. It does NOT import from api/ or auth/.
"""
