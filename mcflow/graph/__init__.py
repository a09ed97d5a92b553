"""Graph primitives.

This package provides the capacitated network type `FlowNetwork` and its
residual edge variant `ResidualNetwork`, both built on networkx.
"""
