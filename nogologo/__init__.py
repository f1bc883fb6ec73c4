"""NoGoLogo

Fans an image prompt out to xAI, OpenAI and Gemini and saves the returned
images to a local photo library.
"""

__version__ = "0.1.0"
