from py_ecc.optimized_bn128 import G1, Z1, add, curve_order, eq, is_inf, is_on_curve, multiply, neg, normalize, b, FQ

from inscribe import combine


class G1Point:
    """
    A BN254 G1 point with a hand-written inscription.

    Wraps py_ecc's optimized (Jacobian) representation. The inscription is
    computed from the canonical affine encoding, so two Jacobian
    representations of the same point inscribe identically:
      - infinity: (0x01,)
      - finite:   (0x00, x (32 bytes BE), y (32 bytes BE))
    """

    MARK = "bn254.G1"

    def __init__(self, point):
        """
        Args:
            point: A py_ecc optimized_bn128 G1 point (x, y, z)
        """
        if not is_inf(point) and not is_on_curve(point, b):
            raise ValueError("point is not on the BN254 G1 curve")
        self.point = point

    @classmethod
    def generator(cls):
        return cls(G1)

    @classmethod
    def identity(cls):
        return cls(Z1)

    @classmethod
    def from_affine(cls, x, y):
        return cls((FQ(x), FQ(y), FQ.one()))

    def to_affine(self):
        """
        Returns:
            (x, y) integers, or None for the point at infinity
        """
        if is_inf(self.point):
            return None
        x, y = normalize(self.point)
        return (x.n, y.n)

    def __add__(self, other):
        return G1Point(add(self.point, other.point))

    def __neg__(self):
        return G1Point(neg(self.point))

    def __mul__(self, scalar):
        return G1Point(multiply(self.point, int(scalar) % curve_order))

    __rmul__ = __mul__

    def __eq__(self, other):
        if not isinstance(other, G1Point):
            return NotImplemented
        return eq(self.point, other.point)

    def __hash__(self):
        return hash(self.to_affine())

    def __repr__(self):
        affine = self.to_affine()
        if affine is None:
            return "G1Point(infinity)"
        return f"G1Point(x={affine[0]:#x}, y={affine[1]:#x})"

    def get_mark(self):
        return self.MARK

    def get_inscription(self):
        affine = self.to_affine()
        if affine is None:
            return combine(self.MARK, [b"\x01"])
        x, y = affine
        return combine(self.MARK, [b"\x00", x.to_bytes(32, "big"), y.to_bytes(32, "big")])
