"""
Error code definitions
"""

# =========================
# Base
# =========================

RET_OK = 0                  # success


# =========================
# Request & Parameters (100–199)
# =========================

RET_INVALID_PARAM = 100         # invalid parameter
RET_MISSING_PARAM = 101         # missing required parameter


# =========================
# Business Logic (300–399)
# =========================

RET_BUSINESS_ERROR = 300         # generic business error
RET_RESOURCE_NOT_FOUND = 301     # resource not found


# =========================
# Data & Storage (500–599)
# =========================

RET_FILE_IO_ERROR = 520          # file io error
