"""VoucherView core: query engine, viewport renderer and scheduling."""
