"""scenecut — plan clips of scenes from one source video.

Each clip is an ordered run of time-bounded scenes with their own crop
position and optional pan. scenecut keeps the timeline consistent and
turns it into ffmpeg commands (trim, crop, pan, scale, concat), one per
clip, plus a bash script that runs them all.
"""
