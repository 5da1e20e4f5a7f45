"""Events Module - The celebrations being planned"""
