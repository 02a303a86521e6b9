"""3D математика сада: векторы и повороты.

Оси как в игровом движке: +Y вверх, +Z вперёд, +X вправо.
Углы Эйлера в градусах, применяются в порядке roll (Z), pitch (X), yaw (Y).
Положительный pitch опускает нос, положительный yaw поворачивает вправо.
"""

import math


class Vector3:
    """3D вектор с базовыми операциями"""

    __slots__ = ("x", "y", "z")

    def __init__(self, x=0, y=0, z=0):
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    @classmethod
    def zero(cls):
        return cls(0, 0, 0)

    @classmethod
    def up(cls):
        return cls(0, 1, 0)

    @classmethod
    def forward(cls):
        return cls(0, 0, 1)

    @classmethod
    def right(cls):
        return cls(1, 0, 0)

    def __add__(self, other):
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other):
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self):
        return Vector3(-self.x, -self.y, -self.z)

    def __mul__(self, scalar):
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar):
        return self.__mul__(scalar)

    def __truediv__(self, scalar):
        if scalar == 0:
            return Vector3(0, 0, 0)
        return Vector3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __eq__(self, other):
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.x == other.x and self.y == other.y and self.z == other.z

    def dot(self, other):
        """Скалярное произведение"""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other):
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def magnitude(self):
        return math.sqrt(self.x ** 2 + self.y ** 2 + self.z ** 2)

    def magnitude_squared(self):
        return self.x ** 2 + self.y ** 2 + self.z ** 2

    def normalize(self):
        """Нормализованный вектор; нулевой вектор остаётся нулевым"""
        mag = self.magnitude()
        if mag < 1e-12:
            return Vector3(0, 0, 0)
        return Vector3(self.x / mag, self.y / mag, self.z / mag)

    def distance_to(self, other):
        return (self - other).magnitude()

    def distance_squared_to(self, other):
        return (self - other).magnitude_squared()

    def clamp_magnitude(self, max_mag):
        mag = self.magnitude()
        if mag > max_mag:
            return self.normalize() * max_mag
        return self.copy()

    def is_close(self, other, tol=1e-6):
        return self.distance_to(other) <= tol

    def to_tuple(self):
        return (self.x, self.y, self.z)

    def copy(self):
        return Vector3(self.x, self.y, self.z)

    def __repr__(self):
        return f"Vector3({self.x:.3f}, {self.y:.3f}, {self.z:.3f})"


def clamp(value, lo, hi):
    return max(lo, min(hi, value))


def clamp01(value):
    return clamp(value, 0.0, 1.0)


def move_towards(current, target, max_delta):
    """Сдвинуть current к target не больше чем на max_delta"""
    if abs(target - current) <= max_delta:
        return target
    return current + math.copysign(max_delta, target - current)


def normalize_angle(angle):
    """Угол в градусах, приведённый к [0, 360)"""
    angle = math.fmod(angle, 360.0)
    if angle < 0:
        angle += 360.0
    # fmod от крошечного отрицательного числа может округлиться ровно до 360
    return 0.0 if angle >= 360.0 else angle


class Quaternion:
    """Единичный кватернион поворота, хранится как (w, x, y, z)"""

    __slots__ = ("w", "x", "y", "z")

    def __init__(self, w=1.0, x=0.0, y=0.0, z=0.0):
        self.w = float(w)
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    @classmethod
    def identity(cls):
        return cls(1.0, 0.0, 0.0, 0.0)

    @classmethod
    def axis_angle(cls, axis: Vector3, degrees: float):
        axis = axis.normalize()
        half = math.radians(degrees) / 2.0
        s = math.sin(half)
        return cls(math.cos(half), axis.x * s, axis.y * s, axis.z * s)

    @classmethod
    def euler(cls, pitch: float, yaw: float, roll: float = 0.0):
        """Поворот из углов Эйлера в градусах (сначала roll, затем pitch, затем yaw)"""
        qy = cls.axis_angle(Vector3.up(), yaw)
        qx = cls.axis_angle(Vector3.right(), pitch)
        qz = cls.axis_angle(Vector3.forward(), roll)
        return qy * qx * qz

    @classmethod
    def look_rotation(cls, forward: Vector3, up: Vector3 = None):
        """
        Поворот, при котором forward смотрит вдоль `forward`,
        а up максимально близок к `up`.
        """
        up = up if up is not None else Vector3.up()
        z_axis = forward.normalize()
        if z_axis.magnitude_squared() == 0:
            return cls.identity()
        x_axis = up.cross(z_axis)
        if x_axis.magnitude() < 1e-9:
            # forward параллелен up, подойдёт любая перпендикулярная ось
            fallback = Vector3.right() if abs(z_axis.x) < 0.9 else Vector3.forward()
            x_axis = fallback - z_axis * fallback.dot(z_axis)
        x_axis = x_axis.normalize()
        y_axis = z_axis.cross(x_axis)
        return cls.from_axes(x_axis, y_axis, z_axis)

    @classmethod
    def from_axes(cls, x_axis: Vector3, y_axis: Vector3, z_axis: Vector3):
        """Кватернион из ортонормированного базиса (столбцы матрицы)"""
        m00, m01, m02 = x_axis.x, y_axis.x, z_axis.x
        m10, m11, m12 = x_axis.y, y_axis.y, z_axis.y
        m20, m21, m22 = x_axis.z, y_axis.z, z_axis.z
        trace = m00 + m11 + m22
        if trace > 0:
            s = math.sqrt(trace + 1.0) * 2
            q = cls(0.25 * s, (m21 - m12) / s, (m02 - m20) / s, (m10 - m01) / s)
        elif m00 > m11 and m00 > m22:
            s = math.sqrt(1.0 + m00 - m11 - m22) * 2
            q = cls((m21 - m12) / s, 0.25 * s, (m01 + m10) / s, (m02 + m20) / s)
        elif m11 > m22:
            s = math.sqrt(1.0 + m11 - m00 - m22) * 2
            q = cls((m02 - m20) / s, (m01 + m10) / s, 0.25 * s, (m12 + m21) / s)
        else:
            s = math.sqrt(1.0 + m22 - m00 - m11) * 2
            q = cls((m10 - m01) / s, (m02 + m20) / s, (m12 + m21) / s, 0.25 * s)
        return q.normalized()

    def __mul__(self, other):
        if isinstance(other, Vector3):
            return self.rotate(other)
        w1, x1, y1, z1 = self.w, self.x, self.y, self.z
        w2, x2, y2, z2 = other.w, other.x, other.y, other.z
        return Quaternion(
            w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
            w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
            w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
            w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
        )

    def conjugate(self):
        return Quaternion(self.w, -self.x, -self.y, -self.z)

    def norm(self):
        return math.sqrt(self.w ** 2 + self.x ** 2 + self.y ** 2 + self.z ** 2)

    def normalized(self):
        n = self.norm()
        if n < 1e-12:
            return Quaternion.identity()
        return Quaternion(self.w / n, self.x / n, self.y / n, self.z / n)

    def rotate(self, v: Vector3) -> Vector3:
        """Повернуть вектор"""
        # v' = v + 2w(q x v) + 2 q x (q x v)
        q = Vector3(self.x, self.y, self.z)
        t = q.cross(v) * 2.0
        return v + t * self.w + q.cross(t)

    def matrix(self):
        w, x, y, z = self.w, self.x, self.y, self.z
        return (
            (1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)),
            (2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)),
            (2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)),
        )

    def euler_angles(self) -> Vector3:
        """(pitch, yaw, roll) в градусах, каждый в [0, 360)"""
        m = self.matrix()
        sp = clamp(-m[1][2], -1.0, 1.0)
        pitch = math.degrees(math.asin(sp))
        if abs(sp) < 0.999999:
            yaw = math.degrees(math.atan2(m[0][2], m[2][2]))
            roll = math.degrees(math.atan2(m[1][0], m[1][1]))
        else:
            # gimbal lock: roll переносим в yaw
            yaw = math.degrees(math.atan2(-m[2][0], m[0][0]))
            roll = 0.0
        return Vector3(normalize_angle(pitch), normalize_angle(yaw), normalize_angle(roll))

    @property
    def forward(self) -> Vector3:
        return self.rotate(Vector3.forward())

    @property
    def up(self) -> Vector3:
        return self.rotate(Vector3.up())

    @property
    def right(self) -> Vector3:
        return self.rotate(Vector3.right())

    def angle_to(self, other) -> float:
        dot = abs(self.w * other.w + self.x * other.x + self.y * other.y + self.z * other.z)
        return math.degrees(2 * math.acos(clamp(dot, -1.0, 1.0)))

    def to_xyzw(self):
        return (self.x, self.y, self.z, self.w)

    def copy(self):
        return Quaternion(self.w, self.x, self.y, self.z)

    def __repr__(self):
        return f"Quaternion(w={self.w:.3f}, x={self.x:.3f}, y={self.y:.3f}, z={self.z:.3f})"
