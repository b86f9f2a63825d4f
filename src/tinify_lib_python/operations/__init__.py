"""
Operation descriptors - inert values describing server-side transforms.
"""

from tinify_lib_python.operations.convert import ConvertOperation, ImageFormat
from tinify_lib_python.operations.preserve import PreserveOperation, PreserveOptions
from tinify_lib_python.operations.resize import ResizeMethod, ResizeOperation
from tinify_lib_python.operations.store import (
    AwsCloudStoreOperation,
    CloudStoreHeaders,
    CloudStoreOperation,
    GoogleCloudStoreOperation,
)
from tinify_lib_python.operations.transform import TransformOperations

__all__ = [
    "AwsCloudStoreOperation",
    "CloudStoreHeaders",
    "CloudStoreOperation",
    "ConvertOperation",
    "GoogleCloudStoreOperation",
    "ImageFormat",
    "PreserveOperation",
    "PreserveOptions",
    "ResizeMethod",
    "ResizeOperation",
    "TransformOperations",
]
