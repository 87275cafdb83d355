"""Sprint Lab - sales campaign tracker and coach"""
