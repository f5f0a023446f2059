"""
Categories: name/description/order records, listed by `order` descending with
optional paging or name search. Products reference them by id.
"""
