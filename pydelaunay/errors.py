"""Exceptions raised while building a triangulation."""


class TriangulationError(Exception): ...


class InsufficientPointsError(TriangulationError): ...


class DegenerateTriangleError(TriangulationError): ...


class PointOutsideBoundsError(TriangulationError): ...


class SharedEdgeError(TriangulationError): ...
