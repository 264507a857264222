# server_engine/utils/math.py

import numpy as np

# World convention: Z is up, +Y is forward at yaw 0, yaw grows counter-clockwise.


def quaternion_from_axis_angle(axis: np.ndarray, angle: float) -> np.ndarray:
    """Quaternion [x, y, z, w] rotating angle radians around axis."""
    axis = np.asarray(axis, dtype=np.float64)
    axis = axis / np.linalg.norm(axis)
    s = np.sin(angle * 0.5)
    return np.array([axis[0] * s, axis[1] * s, axis[2] * s, np.cos(angle * 0.5)], dtype=np.float32)


def quaternion_multiply(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """Multiply two quaternions."""
    x1, y1, z1, w1 = q1[0], q1[1], q1[2], q1[3]
    x2, y2, z2, w2 = q2[0], q2[1], q2[2], q2[3]

    w = w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2
    x = w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2
    y = w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2
    z = w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2

    return np.array([x, y, z, w], dtype=np.float32)


def quaternion_from_euler(euler: np.ndarray) -> np.ndarray:
    """
    Convert Euler angles (pitch, yaw, roll) in radians to quaternion.
    Yaw turns around Z, pitch around X, roll around Y; applied yaw * pitch * roll.
    Returns [x, y, z, w]
    """
    pitch, yaw, roll = euler[0], euler[1], euler[2]
    q_yaw = quaternion_from_axis_angle(np.array([0.0, 0.0, 1.0]), yaw)
    q_pitch = quaternion_from_axis_angle(np.array([1.0, 0.0, 0.0]), pitch)
    q_roll = quaternion_from_axis_angle(np.array([0.0, 1.0, 0.0]), roll)
    return quaternion_multiply(quaternion_multiply(q_yaw, q_pitch), q_roll)


def quaternion_to_matrix(quat: np.ndarray) -> np.ndarray:
    """Convert quaternion to 4x4 rotation matrix."""
    x, y, z, w = quat[0], quat[1], quat[2], quat[3]

    mat = np.eye(4, dtype=np.float32)

    mat[0, 0] = 1.0 - 2.0 * (y * y + z * z)
    mat[0, 1] = 2.0 * (x * y - w * z)
    mat[0, 2] = 2.0 * (x * z + w * y)

    mat[1, 0] = 2.0 * (x * y + w * z)
    mat[1, 1] = 1.0 - 2.0 * (x * x + z * z)
    mat[1, 2] = 2.0 * (y * z - w * x)

    mat[2, 0] = 2.0 * (x * z - w * y)
    mat[2, 1] = 2.0 * (y * z + w * x)
    mat[2, 2] = 1.0 - 2.0 * (x * x + y * y)

    return mat


def wrap_degrees(angle: float) -> float:
    """Wrap an angle into [0, 360)."""
    return float(angle) % 360.0


def yaw_from_direction(direction: np.ndarray) -> float:
    """Yaw in degrees for a horizontal direction vector."""
    return wrap_degrees(np.degrees(np.arctan2(-direction[0], direction[1])))


def view_direction(yaw_degrees: float, pitch_degrees: float = 0.0) -> np.ndarray:
    """Unit view vector for a yaw/pitch pair (pitch > 0 looks up)."""
    yaw = np.radians(yaw_degrees)
    pitch = np.radians(pitch_degrees)
    return np.array([
        -np.sin(yaw) * np.cos(pitch),
        np.cos(yaw) * np.cos(pitch),
        np.sin(pitch),
    ], dtype=np.float32)
