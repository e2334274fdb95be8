# Services package init
"""
MemoPad Backend — Services Layer
=================================

Service Inventory:
    - MemoStore: storage adapter over the SQLite `memos` table
"""
