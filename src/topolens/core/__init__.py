"""
topolens Core Module.

Data types, the per-query adjacency builder and the GraphStore that owns the
loaded dataset and the current visible subgraph.
"""
