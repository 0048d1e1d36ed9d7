"""
# pngme: hide data inside PNG files

A PNG file is a signature followed by a list of chunks; a decoder ignores
the ancillary chunks it doesn't know, so a chunk with a made-up type is a
good place where to put arbitrary data without corrupting the image.

The binary format is described declaratively: a Chunk is a sequence of
fields and two basic operations are defined on it and its sub components

 1. unpack(): reading the binary data and build a high-level representation
    of that. The stream is read sequentially and each field knows how many
    bytes it needs (possibly depending on the value of another field).

 2. pack(): encode the high-level representation into binary data.

Packing what was unpacked gives back exactly the original bytes.
"""
