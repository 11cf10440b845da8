from .projector import OffAxisProjector, compute_frustum, perspective_matrix, view_matrix

__all__ = ["OffAxisProjector", "compute_frustum", "perspective_matrix", "view_matrix"]
