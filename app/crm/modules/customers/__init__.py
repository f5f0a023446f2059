"""
Customers module.

- JSON CRUD under /api/customer (list, fetch, create, update, delete)
- Browser pages under /customer (list + inline create, detail, add, edit)
- Member tier labels and age are derived for display only; nothing derived is stored
"""
