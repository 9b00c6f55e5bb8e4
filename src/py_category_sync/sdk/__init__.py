"""Public SDK layer for py_category_sync.

Exports:
- bootstrap: init_app/AppContext wiring repository, state store, clock,
  bootstrap controller and sync manager
- errors: public exceptions and map_exception()
- use_cases: get/update/delete facades raising the public exceptions
"""

__all__ = ["bootstrap", "errors", "use_cases"]
