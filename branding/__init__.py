"""Branding package for uploaded images.

This package turns an uploaded image plus a handful of loosely-typed form
options into a branded copy: optionally resized, darkened and captioned,
always with the logo composited onto one corner. See ``processor`` for the
request pipeline and ``image_ops`` for the individual transforms.
"""
