"""
Destination side of the import.

This subpackage holds the image relocator, which downloads remote images
and rehomes them in local storage, and the content and image stores the
import writes to, either on the local filesystem or through the GitHub
contents API.
"""
