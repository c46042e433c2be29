"""Access control core: permission/role catalog, route map, evaluator, policy."""
