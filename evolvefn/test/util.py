"""Helpers shared by the tests"""

def assert_valid(node, max_depth=None, constant_range=(-5.0, 5.0)):
    """Recursively check arity, node types and constant bounds"""
    if max_depth is not None:
        assert node.depth <= max_depth
    assert len(node.children) == node.arity
    if node.node_type == 'operator':
        assert node.arity == 2
    else:
        assert node.arity == 0
        if node.node_type == 'constant':
            assert constant_range[0] <= node.label < constant_range[1]
        else:
            assert node.node_type == 'terminal'
    for child in node.children:
        assert_valid(child, constant_range=constant_range)
