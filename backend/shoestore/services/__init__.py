# Services package init
"""
Shoe Store Backend — Services Layer
=====================================

What:  Data-access layer sitting between routes (HTTP) and MongoDB (persistence).
How:   Services accept decoded schemas, perform one driver call per operation,
       and return schemas or raise application exceptions.

Service Inventory:
    - ShoeService: insert, list, get, update and delete over the shoes collection
"""
